import pytest

from contacts_convert.mapping import apply_mapping, identity_mapping
from contacts_convert.models import Contact
from contacts_convert.tabular import parse_tabular, write_tabular
from contacts_convert.vcard import escape_value, parse_cards, write_card, write_cards

HEADER = (
    "First Name,Last Name,Organization,Job Title,Mobile Phone,"
    "Work Phone,Email,Website,Address,Notes"
)


def _full_contact() -> Contact:
    return Contact(
        contact_id="c-0",
        first_name="Ada",
        last_name="Lovelace",
        organization="Analytical Engines; Ltd",
        job_title="Engineer, Lead",
        mobile_phone="+1 555 0100",
        work_phone="+1 555 0199",
        email="ada@example.com",
        website="https://example.com/ada",
        address="12 St James Sq, London",
        note="line1\nline2; a,b",
    )


def test_write_card_minimal_output():
    card = write_card(Contact(first_name="John", last_name="Doe"), "4.0")
    assert card == "BEGIN:VCARD\nVERSION:4.0\nN:Doe;John;;;\nFN:John Doe\nEND:VCARD\n"


def test_write_card_full_emission_order():
    card = write_card(_full_contact(), "3.0")
    assert card.splitlines() == [
        "BEGIN:VCARD",
        "VERSION:3.0",
        "N:Lovelace;Ada;;;",
        "FN:Ada Lovelace",
        "ORG:Analytical Engines\\; Ltd",
        "TITLE:Engineer\\, Lead",
        "TEL;TYPE=CELL:+1 555 0100",
        "TEL;TYPE=WORK:+1 555 0199",
        "EMAIL;TYPE=INTERNET:ada@example.com",
        "URL:https://example.com/ada",
        "ADR;TYPE=HOME:;;12 St James Sq\\, London;;;;",
        "NOTE:line1\\nline2\\; a\\,b",
        "END:VCARD",
    ]


def test_write_card_formatted_name_is_not_escaped():
    card = write_card(Contact(first_name="Ann", last_name="Lee, Jr"), "2.1")
    assert "N:Lee\\, Jr;Ann;;;\n" in card
    assert "FN:Ann Lee, Jr\n" in card


def test_write_card_rejects_unknown_version():
    with pytest.raises(ValueError):
        write_card(Contact(first_name="Ann"), "5.0")


def test_escape_value_escapes_backslash_first():
    assert escape_value("a\\;b") == "a\\\\\\;b"
    assert escape_value("") == ""


def test_write_cards_separates_with_blank_line():
    text = write_cards([Contact(first_name="A"), Contact(first_name="B")], "3.0")
    assert "END:VCARD\n\nBEGIN:VCARD" in text
    assert text.count("BEGIN:VCARD") == 2
    assert write_cards([], "3.0") == ""


def test_card_round_trip_preserves_fields():
    original = _full_contact()
    parsed = parse_cards(write_card(original, "3.0"))[0]
    assert parsed.replace(contact_id=original.contact_id) == original


def test_note_escaping_round_trip():
    contact = Contact(first_name="Ann", note="line1\nline2; a,b")
    card = write_card(contact, "3.0")
    assert "NOTE:line1\\nline2\\; a\\,b" in card
    assert parse_cards(card)[0].note == "line1\nline2; a,b"


def test_write_tabular_header_and_quoting():
    text = write_tabular(
        [
            Contact(first_name="Ann", note='say "hi"'),
            Contact(first_name="Bob", organization="Acme, Inc", address="a\nb"),
        ]
    )
    assert text.startswith("\ufeff" + HEADER + "\n")
    lines = text[1:].split("\n")
    assert lines[1] == 'Ann,,,,,,,,,"say ""hi"""'
    assert lines[2] == 'Bob,,"Acme, Inc",,,,,,"a'
    assert lines[3] == 'b",'


def test_write_tabular_without_contacts():
    assert write_tabular([]) == "\ufeff" + HEADER + "\n"


def test_tabular_quote_round_trip():
    text = write_tabular([Contact(first_name="Ann", job_title='The "Boss", really')])
    rows = parse_tabular(text)
    assert rows[0]["Job Title"] == 'The "Boss", really'


def test_tabular_round_trip_through_identity_mapping():
    contacts = [
        _full_contact().replace(note="no newline; but, commas"),
        Contact(contact_id="c-1", first_name="Bob", email="bob@example.com"),
    ]
    text = write_tabular(contacts)
    restored = apply_mapping(parse_tabular(text), identity_mapping())
    assert restored == contacts
    assert write_tabular(restored) == text


if __name__ == "__main__":
    pytest.main(["-q"])
