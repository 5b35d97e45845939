from .models import ExtractedItem, InventoryItem, InventorySheet, PositionedRun
from .config import DEFAULT_PROFILE, LayoutProfile, load_profile
from .errors import IngestError, MalformedContainerError, PdfParseError
from .aggregator import ItemAggregator
from .remito import parse_remito_pdf
from .inventory import parse_inventory_sheet, peek_rows
from .outputs import write_csv, write_json
from .stats import summary
