import uuid
from sqlalchemy import Column, String, Boolean, Integer, Text
from sqlalchemy.orm import relationship
from cinebook.db.session import Base

class Movie(Base):
    __tablename__ = "movies"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(255), nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    is_active = Column(Boolean, default=True)

    showtimes = relationship("Showtime", back_populates="movie")

class Cinema(Base):
    __tablename__ = "cinemas"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    city = Column(String(100), nullable=False, index=True)
    address = Column(Text, nullable=True)

    showtimes = relationship("Showtime", back_populates="cinema")
