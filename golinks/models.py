from sqlalchemy import Column, Integer, String, Text

from golinks.database import Base


class Link(Base):
    __tablename__ = "links"
    # AUTOINCREMENT keeps SQLite from handing out the id of a deleted row again
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True)
    path = Column(String(50), unique=True, nullable=False)
    url = Column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"Link(id={self.id!r}, path={self.path!r}, url={self.url!r})"
