# prescweb/models/prescription.py
from datetime import datetime

from sqlalchemy import (
    JSON,
    DateTime,
    ForeignKey,
    Integer,
    String,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from prescweb.models.base import Base
from prescweb.models.doctor import Doctor


class Prescription(Base):
    """
    A submitted prescription.

    The whole clinical payload is kept as one JSON document in
    ``prescription_data``; only the columns below are queried.
    Rows are append-only.
    """

    __tablename__ = "prescriptions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # patientDetails.regNo
    patient_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    doctor_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("doctors.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    prescription_data: Mapped[dict] = mapped_column(JSON, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
        index=True,
    )

    doctor: Mapped["Doctor | None"] = relationship("Doctor")

    @property
    def prescription_no(self) -> str:
        return f"PR{self.id}"
