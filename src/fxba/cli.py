"""
Command-line interface for fxba.
"""

from __future__ import annotations

import argparse
import json
import sys

from fxba import __version__
from fxba.core.calculator import Calculator
from fxba.core.errors import CalculatorError
from fxba.core.events import parse_keys
from fxba.core.features import CalculatorModel
from fxba.core.interfaces import WorksheetRegistry
from fxba.core.kinds import W
from fxba.core.loop import ScriptedShell, run_event_loop
from fxba.core.utils import format_number
from fxba.engines.bond import BondInput
from fxba.engines.depreciation import (
    DepreciationInput,
    DepreciationMethod,
    depreciation_schedule,
)
from fxba.engines.tvm import TVM_VARIABLES, PaymentMode, amortization_schedule
from fxba.scenarios import run_scenarios, summarize


def _calculator(args) -> Calculator:
    model = CalculatorModel.PROFESSIONAL if args.pro else CalculatorModel.STANDARD
    calc = Calculator(model=model)
    calc.set_display_decimals(args.decimals)
    return calc


def _show(args, label: str, value: float) -> None:
    print(f"{label} = {format_number(value, args.decimals)}")


def _compute(calc: Calculator, kind: str, var: str) -> float:
    """Compute and record ``var`` through the worksheet strategy for ``kind``."""
    ws = WorksheetRegistry[kind]
    value = ws.compute(calc, var)
    ws.record(calc, var, value)
    return value


def _parse_flow(text: str) -> tuple[float, int]:
    """Parse ``AMOUNT`` or ``AMOUNTxCOUNT`` (e.g. ``25000x3``)."""
    amount, _, count = text.lower().partition("x")
    try:
        return float(amount), int(count) if count else 1
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid cash flow {text!r}") from None


def _load_tvm(calc: Calculator, args) -> None:
    t = calc.tvm
    t.n, t.i_y, t.pv, t.pmt, t.fv = args.n, args.iy, args.pv, args.pmt, args.fv
    t.p_y = args.py
    t.c_y = args.cy if args.cy is not None else args.py
    t.mode = PaymentMode.BEGIN if args.bgn else PaymentMode.END


def cmd_selftest(args) -> int:
    """Run the reference scenarios and report PASS/FAIL per case."""
    results = run_scenarios()
    passed, total = summarize(results)

    if args.json:
        report = {
            "passed": passed,
            "total": total,
            "results": [r.to_dict() for r in results],
        }
        json.dump(report, sys.stdout, indent=2)
        sys.stdout.write("\n")
    else:
        for r in results:
            status = "PASS" if r.passed else "FAIL"
            actual = r.error if r.actual is None else f"{r.actual:.4f}"
            print(
                f"[{status}] {r.name}: expected {r.expected:.4f} "
                f"got {actual} (tol {r.tolerance:g})"
            )
        print(f"{passed}/{total} passed")
    return 0 if passed == total else 1


def cmd_tvm(args) -> int:
    """Solve one TVM variable."""
    try:
        calc = _calculator(args)
        _load_tvm(calc, args)
        value = _compute(calc, W.TVM, args.solve)
    except CalculatorError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    _show(args, args.solve, value)
    return 0


def cmd_cashflow(args) -> int:
    """NPV, IRR and (on the Professional model) NFV, PB, DPB and MIRR."""
    calc = _calculator(args)
    try:
        calc.cashflow.cf0 = args.cf0
        for amount, count in args.flow or []:
            calc.cashflow.add(amount, count)
        calc.cashflow_rates.rate = args.rate
        calc.cashflow_rates.reinvest_rate = (
            args.reinvest if args.reinvest is not None else args.rate
        )
        labels = ["NPV", "IRR"]
        if args.pro:
            labels += ["NFV", "PB", "DPB", "MIRR"]
        values = [(label, _compute(calc, W.CASHFLOW, label)) for label in labels]
    except CalculatorError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    for label, value in values:
        _show(args, label, value)
    return 0


def cmd_amort(args) -> int:
    """Amortize payments P1..P2 of a loan, solving PMT when it is not given."""
    calc = _calculator(args)
    try:
        _load_tvm(calc, args)
        if args.pmt == 0:
            _compute(calc, W.TVM, "PMT")
        calc.amortization.p1, calc.amortization.p2 = args.p1, args.p2
        _compute(calc, W.AMORTIZATION, "BAL")
        if args.schedule:
            frame = amortization_schedule(calc.tvm, args.p1, args.p2)
    except CalculatorError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    _show(args, "PMT", calc.tvm.pmt)
    _show(args, "BAL", calc.amortization.balance)
    _show(args, "PRN", calc.amortization.principal)
    _show(args, "INT", calc.amortization.interest)
    if args.schedule:
        print(frame.to_string(index=False))
    return 0


def cmd_bond(args) -> int:
    """Bond price from yield, or yield from price, with AI and durations."""
    calc = _calculator(args)
    try:
        calc.bond.terms = BondInput(
            settlement=args.settlement,
            maturity=args.maturity,
            coupon_rate=args.coupon,
            redemption=args.redemption,
            frequency=args.frequency,
            day_count=args.day_count,
        )
        if args.price is not None:
            calc.bond.price = args.price
            _compute(calc, W.BOND, "YLD")
        else:
            calc.bond.yield_ = args.yield_
            _compute(calc, W.BOND, "PRI")
        if args.pro:
            _compute(calc, W.BOND, "DUR")
            _compute(calc, W.BOND, "MOD")
    except CalculatorError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    ws = calc.bond
    _show(args, "PRI", ws.price)
    _show(args, "YLD", ws.yield_)
    _show(args, "AI", ws.accrued_interest)
    _show(args, "DIRTY", ws.dirty_price)
    if args.pro:
        _show(args, "DUR", ws.duration)
        _show(args, "MOD", ws.modified_duration)
    return 0


def cmd_depr(args) -> int:
    """Depreciation for one year, or a full schedule."""
    calc = _calculator(args)
    asset = DepreciationInput(
        cost=args.cost,
        salvage=args.salvage,
        life=args.life,
        db_rate=args.db_rate,
        start_month=args.start_month,
    )
    try:
        calc.depreciation.asset = asset
        calc.depreciation.method = DepreciationMethod(args.method)
        calc.depreciation.year = args.year
        _compute(calc, W.DEPRECIATION, "DEP")
        if args.years:
            frame = depreciation_schedule(asset, calc.depreciation.method)
    except CalculatorError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    ws = calc.depreciation
    _show(args, "DEP", ws.depreciation)
    _show(args, "RBV", ws.book_value)
    _show(args, "RDV", ws.remaining)
    if args.years:
        print(frame.to_string(index=False))
    return 0


def cmd_keys(args) -> int:
    """Replay a key script through the event loop and print each display."""
    calc = _calculator(args)
    try:
        events = parse_keys(" ".join(args.script))
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    shell = ScriptedShell(events)
    run_event_loop(shell, calc)
    frames = shell.frames if args.trace else shell.frames[-1:]
    for frame in frames:
        print(frame)
    return 1 if calc.error_code is not None else 0


def _add_tvm_arguments(p: argparse.ArgumentParser) -> None:
    p.add_argument("--n", type=float, default=0.0, help="Number of periods")
    p.add_argument("--iy", type=float, default=0.0, help="Annual rate in percent")
    p.add_argument("--pv", type=float, default=0.0, help="Present value")
    p.add_argument("--pmt", type=float, default=0.0, help="Payment")
    p.add_argument("--fv", type=float, default=0.0, help="Future value")
    p.add_argument("--py", type=float, default=12.0, help="Payments per year")
    p.add_argument(
        "--cy", type=float, default=None, help="Compounding periods per year (default: P/Y)"
    )
    p.add_argument("--bgn", action="store_true", help="Payments at period start")


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="fxba", description="fxba - Financial calculator core"
    )

    # Version argument
    parser.add_argument("--version", action="version", version=f"fxba {__version__}")
    parser.add_argument(
        "--pro", action="store_true", help="Use the Professional model"
    )
    parser.add_argument(
        "--standard",
        dest="pro",
        action="store_false",
        help="Use the Standard model (default)",
    )
    parser.set_defaults(pro=False)
    parser.add_argument(
        "--decimals",
        type=int,
        default=-1,
        help="Fixed decimal places 0-9, -1 for floating (default: -1)",
    )

    subparsers = parser.add_subparsers(
        dest="cmd", required=True, help="Available commands"
    )

    # Selftest command
    selftest_parser = subparsers.add_parser(
        "selftest", help="Run the reference scenario battery"
    )
    selftest_parser.add_argument(
        "--json", action="store_true", help="Output in JSON format"
    )
    selftest_parser.set_defaults(func=cmd_selftest)

    # TVM command
    tvm_parser = subparsers.add_parser("tvm", help="Solve a TVM variable")
    tvm_parser.add_argument(
        "--solve", required=True, choices=TVM_VARIABLES, help="Variable to solve"
    )
    _add_tvm_arguments(tvm_parser)
    tvm_parser.set_defaults(func=cmd_tvm)

    # Cash-flow command
    cf_parser = subparsers.add_parser("cashflow", help="NPV/IRR of uneven cash flows")
    cf_parser.add_argument("--cf0", type=float, required=True, help="Initial flow")
    cf_parser.add_argument(
        "--flow",
        type=_parse_flow,
        action="append",
        help="AMOUNT or AMOUNTxCOUNT, repeatable, in period order",
    )
    cf_parser.add_argument(
        "--rate", type=float, default=0.0, help="Discount rate in percent"
    )
    cf_parser.add_argument(
        "--reinvest", type=float, default=None, help="MIRR reinvestment rate in percent"
    )
    cf_parser.set_defaults(func=cmd_cashflow)

    # Amortization command
    amort_parser = subparsers.add_parser("amort", help="Amortize a loan")
    _add_tvm_arguments(amort_parser)
    amort_parser.add_argument("--p1", type=int, default=1, help="First payment")
    amort_parser.add_argument("--p2", type=int, default=12, help="Last payment")
    amort_parser.add_argument(
        "--schedule", action="store_true", help="Print the per-payment schedule"
    )
    amort_parser.set_defaults(func=cmd_amort)

    # Bond command
    bond_parser = subparsers.add_parser("bond", help="Bond price or yield")
    bond_parser.add_argument(
        "--settlement", type=int, required=True, help="Settlement date (YYYYMMDD)"
    )
    bond_parser.add_argument(
        "--maturity", type=int, required=True, help="Maturity date (YYYYMMDD)"
    )
    bond_parser.add_argument(
        "--coupon", type=float, required=True, help="Annual coupon in percent"
    )
    bond_parser.add_argument(
        "--redemption", type=float, default=100.0, help="Redemption in percent of par"
    )
    bond_parser.add_argument(
        "--frequency", type=int, default=2, help="Coupons per year (1, 2, 4, 12)"
    )
    bond_parser.add_argument(
        "--day-count",
        default="ACT/ACT",
        choices=["ACT/ACT", "30/360", "ACT/360", "ACT/365"],
        help="Day-count convention",
    )
    solve_for = bond_parser.add_mutually_exclusive_group(required=True)
    solve_for.add_argument("--price", type=float, help="Clean price, solves yield")
    solve_for.add_argument(
        "--yield", dest="yield_", type=float, help="Annual yield in percent, solves price"
    )
    bond_parser.set_defaults(func=cmd_bond)

    # Depreciation command
    depr_parser = subparsers.add_parser("depr", help="Depreciate an asset")
    depr_parser.add_argument(
        "--method",
        default="SL",
        choices=[m.value for m in DepreciationMethod],
        help="Depreciation method",
    )
    depr_parser.add_argument("--cost", type=float, required=True, help="Asset cost")
    depr_parser.add_argument("--salvage", type=float, default=0.0, help="Salvage value")
    depr_parser.add_argument("--life", type=float, required=True, help="Life in years")
    depr_parser.add_argument(
        "--db-rate", type=float, default=200.0, help="Declining-balance rate in percent"
    )
    depr_parser.add_argument(
        "--start-month", type=int, default=1, help="Month of acquisition (1-12)"
    )
    depr_parser.add_argument("--year", type=int, default=1, help="Year to report")
    depr_parser.add_argument(
        "--years", action="store_true", help="Print the full schedule"
    )
    depr_parser.set_defaults(func=cmd_depr)

    # Keys command
    keys_parser = subparsers.add_parser(
        "keys", help="Replay a key script, e.g. '360 N 5.4 I/Y 250000 PV CPT PMT'"
    )
    keys_parser.add_argument("script", nargs="+", help="Key tokens")
    keys_parser.add_argument(
        "--trace", action="store_true", help="Print the display after every key"
    )
    keys_parser.set_defaults(func=cmd_keys)

    # Parse arguments and execute
    args = parser.parse_args()
    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
