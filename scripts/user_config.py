"""scalemask User Configuration.

This is the user-facing configuration file. Modify settings here to adapt
the pipeline to a different legend. Expert defaults are in
src/scalemask/schemas/param.py

Usage:
    python scripts/run_overlay.py maps/*.png --config scripts/user_config.py
"""

CONFIG = {
    # ========================================================================
    # LEGEND (REFERENCE IMAGE)
    # ========================================================================
    "REFERENCE_IMAGE": "image.png",   # Image containing the vertical color bar
    "SCAN_ROWS": (7, 472),            # First and last legend row (inclusive)
    "SAMPLE_COLUMNS": (650, 658),     # Columns averaged on every legend row

    # Known points on the color bar: pixel row -> physical value.
    # Rows must be strictly ascending; the first and last row should match
    # SCAN_ROWS so every scanned row gets a value.
    "ANCHORS": {
        "rows":   [7, 41, 79, 120, 161, 200, 240, 280, 322, 361, 401, 440, 472],
        "values": [50.0, 43.4, 36.7, 30.9, 25.4, 20.8, 16.6, 12.9, 10.0, 6.8, 4.3, 2.2, 0.0],
    },

    # ========================================================================
    # OVERLAY
    # ========================================================================
    "TINT_COLOR": (0, 0, 255),        # RGB of every overlay pixel
    "SATURATION_THRESHOLD": 50,       # Value at which the overlay is fully opaque

    # ========================================================================
    # PERFORMANCE & LOGGING
    # ========================================================================
    "IMAGE_WORKERS": 4,               # Images processed concurrently
    "ROW_WORKERS": 4,                 # Rows classified concurrently per image
    "LOG_LEVEL": "INFO",
    "LOG_FILE": None,
}
