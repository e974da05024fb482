"""Train search protocol, train database model, FDI XML, DCC packets and command station options."""

__version__ = "0.1.0"

__all__ = [
    "traindb_defs",
    "traindb",
    "find_protocol",
    "xml_generator",
    "fdi_xml",
    "dcc_packet",
    "options",
]