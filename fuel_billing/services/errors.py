class InvoiceError(Exception):
    """Base class for invoicing failures that are reported to the user."""


class InvalidPeriod(InvoiceError):
    def __init__(self, month, year) -> None:
        super().__init__(f"Invalid invoice period: month={month!r}, year={year!r}")
        self.month = month
        self.year = year


class NoDataForPeriod(InvoiceError):
    def __init__(self, organization_id: int, label: str) -> None:
        super().__init__(f"Nothing to invoice for organization {organization_id} in {label}")
        self.organization_id = organization_id
        self.label = label


class InvalidInput(Exception):
    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = errors
