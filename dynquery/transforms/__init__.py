"""Transform steps for dynquery pipelines."""

from dynquery.transforms.data_ops import Where, TextFilter, ExpressionFilter, OrderBy, Select, Take

__all__ = ["Where", "TextFilter", "ExpressionFilter", "OrderBy", "Select", "Take"]
