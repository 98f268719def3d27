"""
fxba worksheet kind constants.
"""


class W:
    # === Financial worksheets ===
    TVM = "tvm"  # N, I/Y, PV, PMT, FV
    AMORTIZATION = "amort"  # P1, P2 -> BAL, PRN, INT
    CASHFLOW = "cashflow"  # CF0, Cnn/Fnn -> NPV, IRR, ...

    # === Securities and assets ===
    BOND = "bond"
    DEPRECIATION = "depreciation"

    # === Analysis ===
    STATISTICS = "statistics"
    DATE = "date"

    # === Business (Professional model) ===
    BREAKEVEN = "breakeven"
    PROFIT_MARGIN = "profit_margin"

    @classmethod
    def all_kinds(cls) -> list[str]:
        """Enumerate all known worksheet kinds, in selection order."""
        return [
            cls.TVM,
            cls.AMORTIZATION,
            cls.CASHFLOW,
            cls.BOND,
            cls.DEPRECIATION,
            cls.STATISTICS,
            cls.DATE,
            cls.BREAKEVEN,
            cls.PROFIT_MARGIN,
        ]
