import pytest
from PIL import Image

from upn_config import ResourceLocator
from upn_record import LegacyUPNRecord, UPNRecord


@pytest.fixture
def new_record():
    """Complete 19-field record."""
    return UPNRecord(
        payer_iban="SI56040010019981506",
        payer_name="Janez Novak",
        payer_address="Dunajska ulica 1",
        payer_post="1000 Ljubljana",
        payer_reference="SI99",
        is_deposit=False,
        is_withdrawal=False,
        is_urgent=True,
        receiver_iban="SI56040010049226426",
        receiver_name="Test podjetje d.o.o.",
        receiver_address="Testna ulica 1",
        receiver_post="2000 Maribor",
        receiver_reference="SI99",
        amount=1268.74,
        code="CPYR",
        purpose="Plačilo računa 18/2024",
        payment_date="11.07.2024",
        payment_deadline="25.07.2024",
    )


@pytest.fixture
def legacy_record():
    return LegacyUPNRecord(
        payer_name="Janez Novak",
        payer_address="Dunajska ulica 1",
        payer_post="1000 Ljubljana",
        receiver_name="Test podjetje d.o.o.",
        receiver_address="Testna ulica 1",
        receiver_post="2000 Maribor",
        receiver_iban="SI56040010049226426",
        amount=100.50,
        code="RENT",
        reference="SI99",
        purpose="Test payment legacy format",
        due_date="20240711",
    )


@pytest.fixture
def template_path(tmp_path):
    """Blank stand-in for the UPN form template."""
    path = tmp_path / "upn_sl.png"
    Image.new("RGB", (1240, 600), "white").save(path)
    return path


@pytest.fixture
def locator(template_path, tmp_path):
    # Font is missing on purpose: renderer falls back to Pillow's default font
    return ResourceLocator(template_path=template_path, font_path=tmp_path / "missing.ttf")
