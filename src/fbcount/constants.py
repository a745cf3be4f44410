"""Constants shared by the fbcount modules.

Copyright © 2025 Pixelgen Technologies AB.
"""

# Default 10x Genomics 3' feature barcoding layout
DEFAULT_CELL_CODE_LENGTH = 16
DEFAULT_CELL_CODE_OFFSET = 0
DEFAULT_BARCODE_LENGTH = 15
DEFAULT_BARCODE_OFFSET = 10

# Maximum edit distance for approximate barcode matching
MAX_EDIT_DISTANCE = 2

# Column schema of a cellranger feature reference file
PANEL_COLUMNS = ["id", "name", "read", "pattern", "sequence", "feature_type"]
PANEL_SEQUENCE_COLUMN = "sequence"

# poly-G (empty cluster) and the TotalSeq-B hashtag cleavage product
DEFAULT_IGNORED_BARCODES = ("GGGGGGGGGGGGGGG", "CCTAATGGTCCAGAC")

DEFAULT_MIN_READS = 5
DEFAULT_MIN_CELLS = 5

# Number of read pairs between live table updates
PROGRESS_INTERVAL = 500_000

# Number of unknown barcodes to report
UNKNOWN_TOP = 20
