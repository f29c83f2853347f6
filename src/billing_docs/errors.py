"""Error taxonomy for record lookup and document rendering."""


class BillingDocsError(Exception):
    """Base class for all billing-docs errors."""


class RecordNotFoundError(BillingDocsError):
    """The requested record id does not exist in the store."""

    def __init__(self, kind: str, record_id: str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} record {record_id!r} not found")


class MalformedRecordError(BillingDocsError):
    """The record (or an asset it needs) is structurally unusable; aborts the render."""


class ColumnCountMismatchError(MalformedRecordError):
    """A row does not carry one cell per schema column."""

    def __init__(self, expected: int, actual: int, row_index: int, section: str = "body"):
        self.expected = expected
        self.actual = actual
        self.row_index = row_index
        self.section = section
        super().__init__(
            f"{section} row {row_index} has {actual} cells, schema has {expected} columns"
        )


class MissingAssetError(MalformedRecordError):
    """A required static asset could not be resolved."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"required asset {name!r} is missing")
