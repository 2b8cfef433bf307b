import json
import logging
from decimal import Decimal
from typing import Any, Callable, Iterable, Mapping, TypeVar

T = TypeVar("T")
JSONType = (
    None
    | int
    | Decimal
    | str
    | bool
    | list["JSONType"]
    | dict[str, "JSONType"]
)

logger = logging.getLogger(__name__)


def find(x: Iterable[T], **kwargs: Any) -> T:
    """Find an element that meets all search conditions.

    Args:
      x: objects to search in.
      **kwargs: search parameters: key is matched to object's attribute's name
              and value is matched to object's attribute's value.
    Returns:
      Returns first object that meets search parameters.

    Raises:
      TypeError: if not a single search parameter is provided.
      LookupError: if object is not found.
    """
    if len(kwargs) == 0:
        raise TypeError(
            "unable to find object since not a single"
            " search parameter was provided."
        )
    for element in x:
        if attributes_equal(element, **kwargs):
            return element

    text_params = ", ".join(
        f"{key}=={value!s}" for key, value in kwargs.items()
    )
    raise LookupError(
        "unable to find element using provided search parameters:"
        f" {text_params}."
    )


def filter_objects(
    x: Iterable[T], **kwargs: Callable[[Any], bool] | Any
) -> list[T]:
    """Get objects that meet all conditions.

    Args:
        x: objects to filter.
        **kwargs: names correspond to object's attribute's names and values
                are expected attribute's values. If provided value is a
                callable then it is called with the attribute as an argument
                and decides whether attribute meets the condition.
    Returns:
        New list of objects that meet all conditions.
    Raises:
        TypeError: if not a single search parameter is provided.
    """
    if len(kwargs) == 0:
        raise TypeError(
            "unable to filter objects since not a single"
            " search parameter was provided."
        )
    return [element for element in x if _meets(element, kwargs)]


def attributes_equal(x: Any, **kwargs: Any) -> bool:
    """Check if object's attributes have expected values

    Args:
        x: object
        **kwargs: names correspond to object's attribute's names and
                  values are expected object's attribute's values.
    Returns:
        bool: True if every attribute exists and holds the expected value.
    """
    for search_name, search_value in kwargs.items():
        if (
            not hasattr(x, search_name)
            or getattr(x, search_name) != search_value
        ):
            return False
    return True


def _meets(x: Any, conditions: Mapping[str, Any]) -> bool:
    for search_name, search_value in conditions.items():
        if not hasattr(x, search_name):
            return False
        value = getattr(x, search_name)
        if callable(search_value):
            if not search_value(value):
                return False
        elif value != search_value:
            return False
    return True


def load_data(file: str) -> JSONType:
    """Read JSON file. Floats are parsed as Decimal to keep money exact."""
    with open(file, encoding="utf-8") as f:
        data = json.load(f, parse_float=Decimal)
    logger.debug("Loaded data from %s", file)
    return data


def mapping_to_pretty_str(
    x: Mapping[Any, Any], *, key_repr: bool = False, value_repr: bool = False
) -> str:
    """Returns string representation of a mapping"""
    display_value = repr if value_repr else str
    display_key = repr if key_repr else str
    return ",".join(f"{display_key(k)}={display_value(x[k])}" for k in x)
