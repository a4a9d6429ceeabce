# prescweb/models/medicine.py
from sqlalchemy import JSON, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from prescweb.models.base import Base


class Medicine(Base):
    """
    One catalog row: a generic name in one dosage form.

    Several rows may share a generic name. Brand names live in
    ``medicine_brands`` (ordered by position); strengths are a JSON list.
    """

    __tablename__ = "medicines"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    generic_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    dosage_form: Mapped[str | None] = mapped_column(String(100), nullable=True)
    strengths: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    manufacturer: Mapped[str | None] = mapped_column(String(255), nullable=True)
    package_mark: Mapped[str | None] = mapped_column(String(255), nullable=True)

    indication: Mapped[str | None] = mapped_column(Text, nullable=True)
    contraindication: Mapped[str | None] = mapped_column(Text, nullable=True)
    side_effects: Mapped[str | None] = mapped_column(Text, nullable=True)

    brands: Mapped[list["MedicineBrand"]] = relationship(
        "MedicineBrand",
        back_populates="medicine",
        order_by="MedicineBrand.position",
        cascade="all, delete-orphan",
    )

    @property
    def brand_names(self) -> list[str]:
        return [b.name for b in self.brands]


class MedicineBrand(Base):
    __tablename__ = "medicine_brands"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    medicine_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("medicines.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    medicine: Mapped["Medicine"] = relationship("Medicine", back_populates="brands")
