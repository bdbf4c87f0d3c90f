from .ea_clubs import ClubsApiClient, InvalidInputError
from .factory import get_clubs_client

__all__ = ["ClubsApiClient", "InvalidInputError", "get_clubs_client"]
