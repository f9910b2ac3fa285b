"""
Client-side errors.
"""


class NetworkError(Exception):
    """The request never produced a usable API response."""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail
