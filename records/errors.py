class RecordsError(Exception):
    """Base class for trainee record errors."""


class EmptyBatch(RecordsError):
    # upload produced no profile with a usable training id
    def __init__(self, rows_seen: int = 0):
        self.rows_seen = rows_seen
        super().__init__(f"no usable trainee rows in upload ({rows_seen} rows read)")


class InvalidQuery(RecordsError):
    pass


class StoreUnavailable(RecordsError):
    pass


class RowSourceError(RecordsError):
    # uploaded file could not be read into rows
    pass
