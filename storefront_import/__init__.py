"""Product spreadsheet import for the storefront catalogue.

Typical use from the admin API layer::

    from storefront_import import import_products, generate_template

    outcome = import_products(request_base64, repository, file_name="upload.xlsx")
    return outcome.to_dict()
"""

from .excel.reader import DecodeError, decode_payload, decode_rows
from .excel.template import generate_template, generate_template_base64
from .models import ImportOutcome, ProductRecord
from .services.importer import BatchUnusableError, ProductImportError, import_products
from .services.validation import validate_and_convert

__all__ = [
    "BatchUnusableError",
    "DecodeError",
    "ImportOutcome",
    "ProductImportError",
    "ProductRecord",
    "decode_payload",
    "decode_rows",
    "generate_template",
    "generate_template_base64",
    "import_products",
    "validate_and_convert",
]
