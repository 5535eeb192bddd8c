"""Domain layer for tallybook application."""

_SERVICES = {
    "TransactionService": "tallybook.domain.transaction",
    "CompanyService": "tallybook.domain.company",
    "CounterpartyService": "tallybook.domain.counterparty",
    "CategoryService": "tallybook.domain.category",
    "SummaryService": "tallybook.domain.summary",
    "CSVImportService": "tallybook.domain.csv_import",
    "CSVExportService": "tallybook.domain.csv_export",
}


# Services are imported lazily so that entities and errors can be imported
# from the database and utils layers without circular imports.
def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


__all__ = list(_SERVICES)
