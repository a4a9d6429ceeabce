# prescweb/models/pad_design.py
from datetime import datetime

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from prescweb.models.base import Base


class PadDesign(Base):
    """
    Visual layout of the printed prescription pad (header, footer, watermark).
    """

    __tablename__ = "pad_designs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    design_data: Mapped[dict] = mapped_column(JSON, nullable=False)

    doctor_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("doctors.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
    )
