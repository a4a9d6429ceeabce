import pytest

from prescweb.models.medicine import Medicine
from prescweb.services.medicine_service import (
    MedicineNotFoundError,
    build_medicine,
    get_medicine_details,
    import_medicine_rows,
    search_medicines,
    split_delimited,
)


def _row(generic, brands="", form="Tablet", strength=""):
    return {"generic_name": generic, "brand_names": brands, "dosage_form": form, "strength": strength}


def test_split_delimited_trims_and_drops_empty_tokens():
    assert split_delimited(" Ace, Napa ,,Calpol ") == ["Ace", "Napa", "Calpol"]
    assert split_delimited("") == []
    assert split_delimited(None) == []


def test_paracetamol_details_merge_rows(db_session, paracetamol_catalog):
    details = get_medicine_details(db_session, generic_name="Paracetamol")

    assert details.brand_names == ["Ace", "Napa", "Calpol"]
    assert [(f.dosage_form, f.strengths) for f in details.forms_and_strengths] == [
        ("Tablet", ["500mg"]),
        ("Syrup", ["125mg"]),
    ]
    # clinical text comes from the first row
    assert details.indication == "Fever, mild to moderate pain"
    assert details.contraindication == "Hepatic impairment"


def test_details_strengths_are_deduplicated_and_sorted_lexically(db_session):
    import_medicine_rows(
        db_session,
        [
            _row("Omeprazole", "Seclo", "Capsule", "20mg, 40mg"),
            _row("Omeprazole", "Losectil", "Capsule", "100mg,20mg"),
            _row("Omeprazole", "Seclo", "Injection", "40mg"),
        ],
    )

    details = get_medicine_details(db_session, generic_name="Omeprazole")

    assert details.brand_names == ["Seclo", "Losectil"]
    assert details.strengths_for("Capsule") == ["100mg", "20mg", "40mg"]
    assert details.strengths_for("Injection") == ["40mg"]
    assert details.dosage_forms == ["Capsule", "Injection"]


def test_details_unknown_generic_raises(db_session, paracetamol_catalog):
    with pytest.raises(MedicineNotFoundError):
        get_medicine_details(db_session, generic_name="paracetamol ")


def test_blank_search_returns_empty_list(db_session, paracetamol_catalog):
    assert search_medicines(db_session, query="") == []
    assert search_medicines(db_session, query="   ") == []
    assert search_medicines(db_session, query=None) == []


def test_search_ranks_generic_prefix_then_brand_prefix_then_substring(db_session):
    import_medicine_rows(
        db_session,
        [
            _row("Diacerein", "Arthrocare"),
            _row("Paracetamol", "Ace,Napa"),
            _row("Aceclofenac", "Flexi"),
        ],
    )

    results = search_medicines(db_session, query="ACE")

    assert [m.generic_name for m in results] == ["Aceclofenac", "Paracetamol", "Diacerein"]


def test_search_matches_brand_names_case_insensitively(db_session, paracetamol_catalog):
    results = search_medicines(db_session, query="calp")

    assert [(m.generic_name, m.dosage_form) for m in results] == [("Paracetamol", "Syrup")]
    assert results[0].brand_names == ["Napa", "Calpol"]


def test_search_ties_keep_catalog_order(db_session, paracetamol_catalog):
    results = search_medicines(db_session, query="para")
    assert [m.dosage_form for m in results] == ["Tablet", "Syrup"]


def test_search_is_capped(db_session):
    import_medicine_rows(db_session, [_row(f"Vitamin B{i}") for i in range(1, 26)])

    results = search_medicines(db_session, query="vitamin", limit=20)

    assert len(results) == 20
    assert results[0].generic_name == "Vitamin B1"


def test_search_treats_like_wildcards_literally(db_session):
    import_medicine_rows(db_session, [_row("Zinc Oxide 10%"), _row("Paracetamol")])

    assert [m.generic_name for m in search_medicines(db_session, query="%")] == ["Zinc Oxide 10%"]
    assert search_medicines(db_session, query="_") == []


def test_build_medicine_skips_blank_generic():
    assert build_medicine({"generic_name": "  ", "brand_names": "Napa"}) is None


def test_build_medicine_maps_csv_columns():
    medicine = build_medicine(
        {
            "generic_name": " Cetirizine ",
            "brand_names": "Alatrol, Atrizin",
            "strength": "10mg",
            "dosage_form": "Tablet",
            "manufacturer": "Square",
            "packageMark": "",
            "indication": "Allergic rhinitis",
        }
    )

    assert medicine.generic_name == "Cetirizine"
    assert medicine.brand_names == ["Alatrol", "Atrizin"]
    assert medicine.strengths == ["10mg"]
    assert medicine.package_mark is None
    assert medicine.side_effects is None


def test_import_counts_only_valid_rows(db_session):
    imported = import_medicine_rows(
        db_session,
        [_row("Cetirizine", "Alatrol"), _row("", "Ghost"), _row("Montelukast", "Monas")],
    )

    assert imported == 2
    assert db_session.query(Medicine).count() == 2


def test_search_folds_non_ascii_case(db_session):
    import_medicine_rows(db_session, [_row("Ésoméprazole", "Maxpro"), _row("Omeprazole", "Seclo")])

    assert [m.generic_name for m in search_medicines(db_session, query="ÉSO")] == ["Ésoméprazole"]
    assert [m.generic_name for m in search_medicines(db_session, query="éso")] == ["Ésoméprazole"]
    assert [m.generic_name for m in search_medicines(db_session, query="MÉPRA")] == ["Ésoméprazole"]
