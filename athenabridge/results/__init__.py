from athenabridge.results.coercion import coerce_value
from athenabridge.results.materializer import materialize, materialize_row, materialize_rows
from athenabridge.results.retriever import ResultRetriever, select_strategy, split_output_location, validate_options

__all__ = [
    "coerce_value",
    "materialize",
    "materialize_row",
    "materialize_rows",
    "ResultRetriever",
    "select_strategy",
    "split_output_location",
    "validate_options",
]
