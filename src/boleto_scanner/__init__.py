"""
Scanner → Boleto Decoding → Known-entity gating → Scan History

A deterministic, testable pipeline that turns raw barcode scanner payloads
into decoded Brazilian bank slips (boletos), asks the operator about unknown
banks and beneficiaries, and keeps a deduplicated scan history.
"""

__version__ = "0.1.0"
