# =============================================================================
# SALES ORDERS v1.0
# =============================================================================
# Order lifecycle and statistics core
# =============================================================================

__version__ = "1.0.0"
