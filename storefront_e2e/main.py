from __future__ import annotations

import argparse
import logging

from .browser import PlaywrightStoreSurface, StoreBrowserSession, smoke_test
from .config import OPTIONAL_KEYS, REQUIRED_KEYS, Config
from .errors import VerificationError
from .reconcile import fetch_expected_products
from .report import FAILED, ScenarioResult, build_report
from .scenarios import run_scenario, verify_insufficient_funds, verify_login, verify_product_table, verify_single_purchase
from .store_api import StoreApiClient
from .store_page import DEFAULT_TIMEOUT_MS, LoginPage, StorePage

log = logging.getLogger(__name__)

__version__ = "0.1.0"

SCENARIOS = ["login", "product-table", "insufficient-funds", "purchase"]


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="storefront-e2e")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = p.add_subparsers(dest="cmd", required=False)

    p_config = sub.add_parser("config", help="Config commands")
    sub_config = p_config.add_subparsers(dest="config_cmd", required=True)
    sub_config.add_parser("keys", help="List environment keys")
    sub_config.add_parser("check", help="Validate the environment is filled")

    p_api = sub.add_parser("api", help="Store API commands")
    sub_api = p_api.add_subparsers(dest="api_cmd", required=True)
    p_dump = sub_api.add_parser("dump", help="Print the expected product table built from the API")
    p_dump.add_argument("--limit", type=int, default=0, help="Max rows (0=all)")

    p_browser = sub.add_parser("browser", help="Browser commands")
    sub_browser = p_browser.add_subparsers(dest="browser_cmd", required=True)
    p_smoke = sub_browser.add_parser("smoke", help="Open the store and save a screenshot")
    p_smoke.add_argument("--out", default="artifacts/store_smoke.png")
    p_smoke.add_argument("--headed", action="store_true")

    p_run = sub.add_parser("run", help="Run verification scenarios")
    p_run.add_argument(
        "--scenario",
        action="append",
        choices=SCENARIOS,
        help="Scenario to run (repeatable, default: all)",
    )
    p_run.add_argument("--headed", action="store_true", help="Show the browser window")
    p_run.add_argument("--timeout-ms", type=float, default=DEFAULT_TIMEOUT_MS, help="UI wait timeout")
    p_run.add_argument("--report", default="artifacts/run_report.json")

    return p


def main(argv: list[str] | None = None) -> int:
    p = build_parser()
    args = p.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.version:
        print(__version__)
        return 0

    if args.cmd is None:
        p.print_help()
        return 0

    if args.cmd == "config":
        if args.config_cmd == "keys":
            for k in REQUIRED_KEYS:
                print(k)
            for k in OPTIONAL_KEYS:
                print(f"{k} (optional)")
            return 0

        if args.config_cmd == "check":
            # Intentionally do not print secret values
            cfg = Config.load_from_env()
            print(f"OK: config present for {cfg.base_url}")
            return 0

    cfg = Config.load_from_env()

    if args.cmd == "api" and args.api_cmd == "dump":
        api = _api_client(cfg)
        try:
            records = fetch_expected_products(api)
        except VerificationError as exc:
            print(f"ERROR: {exc}")
            return 1
        if args.limit > 0:
            records = records[: args.limit]
        for i, r in enumerate(records, 1):
            print(f"{i}. {r.name}  {r.price}")
        return 0

    if args.cmd == "browser" and args.browser_cmd == "smoke":
        out = smoke_test(
            cfg.base_url,
            out_path=args.out,
            store_path=cfg.store_path,
            headless=not args.headed,
            cdp_url=cfg.cdp_url,
        )
        print(f"OK: wrote {out}")
        return 0

    if args.cmd == "run":
        return _run(cfg, args)

    raise RuntimeError("unreachable")


def _api_client(cfg: Config) -> StoreApiClient:
    return StoreApiClient(base_url=cfg.base_url, token=cfg.api_token, api_prefix=cfg.api_prefix)


def _run(cfg: Config, args) -> int:
    names = args.scenario or SCENARIOS
    results: list[ScenarioResult] = []

    for name in names:
        print(f"\n→ {name}")
        try:
            result = _run_one(name, cfg, args)
        except Exception as exc:
            # Browser launch failures or harness bugs still end up in the report.
            log.exception("%s: crashed", name)
            result = ScenarioResult(name, FAILED, f"{type(exc).__name__}: {exc}")
        print(f"  → {result.status}")
        results.append(result)

    report = build_report(results)
    print("\n" + report.summary_text())
    path = report.write_json(args.report)
    print(f"\nReport written to {path}")
    return report.exit_code()


def _run_one(name: str, cfg: Config, args) -> ScenarioResult:
    # Fresh browser context and API client per scenario; nothing is shared.
    with StoreBrowserSession(cfg.base_url, headless=not args.headed, cdp_url=cfg.cdp_url) as session:
        surface = PlaywrightStoreSurface(session.page, store_path=cfg.store_path)
        page = StorePage(surface, timeout_ms=args.timeout_ms)

        if name == "login":
            return run_scenario(
                name, verify_login, LoginPage(surface),
                username=cfg.username, password=cfg.password, role=cfg.role,
            )
        if name == "product-table":
            return run_scenario(name, verify_product_table, page, _api_client(cfg))
        if name == "insufficient-funds":
            return run_scenario(name, verify_insufficient_funds, page)
        return run_scenario(name, verify_single_purchase, page)


if __name__ == "__main__":
    raise SystemExit(main())
