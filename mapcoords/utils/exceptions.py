class MapCoordsException(Exception):
    """
    Base class for all mapcoords errors.
    """


class TransformationUnavailable(MapCoordsException, ValueError):
    """
    A coordinate could not be transformed between two coordinate reference systems.

    Raised when either CRS cannot be resolved by the registry or when the projection
    math produces non-finite values. Public functions catch it and return None.
    """


class ProjectionFetchError(MapCoordsException, RuntimeError):
    """
    A projection definition could not be fetched from a remote resource.
    """
