class HardLineError(Exception):
    """Base class for errors raised by the service layer."""

    status_code = 400

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class NotFoundError(HardLineError):
    status_code = 404
