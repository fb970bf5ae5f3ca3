from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.ext.orderinglist import ordering_list
from sqlalchemy.orm import relationship
from .database import Base
from .user import utcnow


class Application(Base):
    __tablename__ = "applications"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    company_name = Column(String, nullable=False, index=True)
    role = Column(String, nullable=False)
    status = Column(String, nullable=False, default="Applied")
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Children only exist inside their application; removing one from the
    # collection deletes its row.
    rounds = relationship(
        "Round",
        back_populates="application",
        order_by="Round.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
    )
    attachments = relationship(
        "Attachment",
        back_populates="application",
        order_by="Attachment.id",
        cascade="all, delete-orphan",
    )
    documents = relationship(
        "Document",
        back_populates="application",
        order_by="Document.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
    )

    def find_round(self, round_id):
        return next((r for r in self.rounds if r.id == round_id), None)

    def find_attachment(self, attachment_id):
        return next((a for a in self.attachments if a.id == attachment_id), None)


class Round(Base):
    __tablename__ = "application_rounds"

    id = Column(Integer, primary_key=True, index=True)
    application_id = Column(Integer, ForeignKey("applications.id", ondelete="CASCADE"), index=True, nullable=False)
    position = Column(Integer, nullable=False, default=0)
    name = Column(String, nullable=False)
    status = Column(String, nullable=False, default="Pending")
    date = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)

    application = relationship("Application", back_populates="rounds")


class Attachment(Base):
    __tablename__ = "application_attachments"

    id = Column(Integer, primary_key=True, index=True)
    application_id = Column(Integer, ForeignKey("applications.id", ondelete="CASCADE"), index=True, nullable=False)
    type = Column(String, nullable=False)
    filename = Column(String, nullable=False)
    url = Column(String, nullable=False)
    uploaded_at = Column(DateTime(timezone=True), default=utcnow)

    application = relationship("Application", back_populates="attachments")


class Document(Base):
    __tablename__ = "application_documents"

    id = Column(Integer, primary_key=True, index=True)
    application_id = Column(Integer, ForeignKey("applications.id", ondelete="CASCADE"), index=True, nullable=False)
    position = Column(Integer, nullable=False, default=0)
    name = Column(String, nullable=False)
    url = Column(String, nullable=False)

    application = relationship("Application", back_populates="documents")
