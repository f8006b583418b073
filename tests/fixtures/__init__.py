"""
Sample scanner payloads for testing.

Barcodes are assembled field by field so each test can see exactly which
digits land in which window:

    bank(3) currency(1) check(1) factor(4) amount(10) free field(25)
"""

CURRENCY = "9"
CHECK_DIGIT = "1"


def make_barcode(
    bank: str = "237",
    factor: str = "9661",
    amount: str = "0000014500",
    free: str = "0" * 25,
) -> str:
    """Build a 44-digit barcode from its fields."""
    digits = f"{bank}{CURRENCY}{CHECK_DIGIT}{factor}{amount}{free}"
    assert len(digits) == 44, f"barcode has {len(digits)} digits"
    return digits


# Itaú: beneficiary at [35:41] -> free field [16:22]
ITAU_BENEFICIARY = "123456"
ITAU_BARCODE = make_barcode(bank="341", free="0" * 16 + ITAU_BENEFICIARY + "000")

# Santander: beneficiary at [20:27] -> free field [1:8]
SANTANDER_BENEFICIARY = "7654321"
SANTANDER_BARCODE = make_barcode(bank="033", free="9" + SANTANDER_BENEFICIARY + "0" * 17)

# Other banks: beneficiary at [36:43] -> free field [17:24]
BRADESCO_BENEFICIARY = "1122334"
BRADESCO_BARCODE = make_barcode(bank="237", free="0" * 17 + BRADESCO_BENEFICIARY + "0")

# Unknown bank code
UNKNOWN_BANK_BARCODE = make_barcode(bank="999", free="0" * 17 + "5555555" + "0")

# Government slip: leading 8, amount at [4:15]
GOVERNMENT_BARCODE = "8170" + "00000012345" + "0" * 29

# Itaú digitable line as printed on the slip
ITAU_DIGITABLE_LINE = "34191.79001 01043.510047 91020.150008 1 96610000014500"
