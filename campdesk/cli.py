"""Command-line interface for campground staff scheduling and seasonal rate cards."""

from __future__ import annotations

import argparse
from datetime import date

from campdesk.api.client import ApiClient
from campdesk.config import CampdeskConfig, load_config
from campdesk.data_io import parse_day
from campdesk.domain.db import get_session, init_database
from campdesk.domain.enums import SwapTab
from campdesk.domain.forms import ShiftForm
from campdesk.domain.repositories import RateCardRepository, ShiftRepository
from campdesk.errors import ConfigError
from campdesk.reporting import summarize_preview, summarize_shifts
from campdesk.services.conflicts import find_shift_conflicts
from campdesk.services.pricing import PricingContext, preview_pricing
from campdesk.services.shifts import schedule_window, status_filter_options
from campdesk.services.sitemap import map_base_image_url, site_map_stats
from campdesk.views.rate_cards import RateCardsView
from campdesk.views.scheduling import SchedulingView
from campdesk.views.swaps import SwapsView


def _config(args: argparse.Namespace) -> CampdeskConfig:
    cfg = load_config(args.config)
    if args.base_url:
        cfg.api.base_url = args.base_url.rstrip("/")
    if args.campground:
        cfg.campground_id = args.campground
    if args.db:
        cfg.db_url = args.db
    return cfg


def _campground(cfg: CampdeskConfig) -> str:
    if not cfg.campground_id:
        raise ConfigError("No campground selected (use --campground or CAMPDESK_CAMPGROUND_ID)")
    return cfg.campground_id


def _start_day(args: argparse.Namespace) -> date:
    if getattr(args, "start", None):
        day = parse_day(args.start)
        if day is None:
            raise SystemExit(f"Invalid --start date: {args.start}")
        return day
    return date.today()


def _scheduling_view(args: argparse.Namespace, cfg: CampdeskConfig) -> SchedulingView:
    return SchedulingView(
        ApiClient.from_config(cfg),
        _campground(cfg),
        current_user_id=getattr(args, "user", None),
        window_start=_start_day(args),
        window_days=getattr(args, "days", None) or cfg.schedule_window_days,
    )


def _cmd_init_db(args: argparse.Namespace) -> None:
    """Initialize the snapshot database."""
    cfg = _config(args)
    init_database(cfg.db_url)
    print(f"[OK] Database initialized: {cfg.db_url}")


def _cmd_sync_shifts(args: argparse.Namespace) -> None:
    """Fetch a window of shifts and store it in the snapshot."""
    cfg = _config(args)
    view = _scheduling_view(args, cfg)
    session = get_session(cfg.db_url)

    try:
        view.load()
        count = ShiftRepository.replace_window(
            session, view.campground_id, view.window_start, view.window_end, view.shifts
        )
        session.close()
        print(f"[OK] Stored {count} shifts for {view.window_start} - {view.window_end}")

    except Exception as e:
        session.rollback()
        session.close()
        print(f"[ERROR] Shift sync failed: {e}")
        raise


def _cmd_shifts(args: argparse.Namespace) -> None:
    """List a window of shifts with conflicts flagged."""
    cfg = _config(args)
    campground_id = _campground(cfg)
    days = args.days or cfg.schedule_window_days
    start, end = schedule_window(_start_day(args), days)

    if args.offline:
        session = get_session(cfg.db_url)
        try:
            shifts = ShiftRepository.get_window(session, campground_id, start, end, args.status)
            members = []
        finally:
            session.close()
        print(f"[INFO] Read {len(shifts)} shifts from snapshot")
    else:
        view = _scheduling_view(args, cfg)
        try:
            view.status_filter = args.status
            view.load()
            view.load_roles()
        except Exception as e:
            print(f"[ERROR] Listing shifts failed: {e}")
            raise
        shifts, members = view.shifts, view.members

    conflicts = find_shift_conflicts(shifts)
    for shift in shifts:
        flag = "  [CONFLICT]" if shift.shift_id in conflicts else ""
        print(f"  {shift!r}{flag}")
    print(summarize_shifts(shifts, conflicts, members))
    if conflicts:
        print(f"[WARN] {len(conflicts)} shifts overlap another shift of the same person")


def _cmd_create_shift(args: argparse.Namespace) -> None:
    cfg = _config(args)
    view = _scheduling_view(args, cfg)
    view.form = ShiftForm(user_id=args.member, date=args.date, start=args.begin, end=args.end, role=args.role or "")

    try:
        if not view.form.role:
            view.load_roles()
        view.create_shift()
    except Exception as e:
        print(f"[ERROR] Shift creation failed: {e}")
        raise


def _cmd_transition(args: argparse.Namespace) -> None:
    """Submit, approve or reject a shift."""
    cfg = _config(args)
    view = _scheduling_view(args, cfg)

    try:
        view.load()
        getattr(view, args.action)(args.shift_id)
    except Exception as e:
        print(f"[ERROR] Could not {args.action} shift {args.shift_id}: {e}")
        raise
    if view.error:
        raise SystemExit(view.error)


def _cmd_move(args: argparse.Namespace) -> None:
    """Move a shift by whole days and/or minutes."""
    cfg = _config(args)
    view = _scheduling_view(args, cfg)

    try:
        view.load()
        if view.find_shift(args.shift_id) is None:
            raise SystemExit(f"Shift {args.shift_id} is not in the window starting {view.window_start}")
        moved = False
        if args.by_days:
            moved = view.move_by_days(args.shift_id, args.by_days) or moved
        if args.by_minutes:
            moved = view.move_time(args.shift_id, args.by_minutes) or moved
    except Exception as e:
        print(f"[ERROR] Move failed: {e}")
        raise
    print("[OK] Shift moved" if moved else "[INFO] Nothing to move")


def _cmd_swap(args: argparse.Namespace) -> None:
    """Ask another staff member to take a shift."""
    cfg = _config(args)
    view = _scheduling_view(args, cfg)

    try:
        view.request_swap(args.shift_id, args.recipient, args.note)
    except Exception as e:
        print(f"[ERROR] Swap request failed: {e}")
        raise


def _cmd_swaps(args: argparse.Namespace) -> None:
    """List swap requests, or act on one."""
    cfg = _config(args)
    view = SwapsView(ApiClient.from_config(cfg), _campground(cfg), current_user_id=args.user)
    view.load_whoami()
    acting = args.accept or args.decline or args.approve or args.reject or args.cancel
    if acting and not view.current_user_id:
        raise SystemExit("--user is required to act on a swap request")

    try:
        view.load()
        if args.accept or args.decline:
            view.respond(args.accept or args.decline, accept=bool(args.accept))
        elif args.approve or args.reject:
            view.decide(args.approve or args.reject, approve=bool(args.approve))
        elif args.cancel:
            view.cancel(args.cancel)
    except Exception as e:
        print(f"[ERROR] Swap request listing failed: {e}")
        raise
    if view.error:
        raise SystemExit(view.error)

    view.set_tab(args.tab)
    for swap in view.visible_swaps:
        print(f"  {swap!r}")
    print(f"[INFO] {len(view.visible_swaps)} swaps on tab '{view.active_tab}'")
    if view.current_user_id:
        print(f"[INFO] Awaiting your response: {view.pending_incoming}")
    if view.is_manager:
        print(f"[INFO] Awaiting manager approval: {view.pending_manager}")


def _cmd_site_map(args: argparse.Namespace) -> None:
    """Print the base map image and site counters of the campground map."""
    cfg = _config(args)
    start = parse_day(args.start) if args.start else None
    end = parse_day(args.end) if args.end else None
    if (args.start and start is None) or (args.end and end is None):
        raise SystemExit("Invalid --start/--end date (use YYYY-MM-DD)")

    try:
        data = ApiClient.from_config(cfg).get_site_map(_campground(cfg), start, end)
    except Exception as e:
        print(f"[ERROR] Site map fetch failed: {e}")
        raise

    image_url = map_base_image_url(data)
    if image_url:
        print(f"[INFO] Base image: {image_url}")
    else:
        print("[WARN] No base map image configured")

    sites = data.get("sites") if isinstance(data, dict) else None
    sites = sites if isinstance(sites, list) else []
    stats = site_map_stats(sites)
    print(f"[INFO] {len(sites)} sites, {stats.ada_count} ADA, {stats.conflict_count} with conflicts")
    for site_id, label in stats.labels.items():
        print(f"  {site_id}: {label}")


def _cmd_rate_cards(args: argparse.Namespace) -> None:
    """List a season's rate cards with their discounts and incentives."""
    cfg = _config(args)
    view = RateCardsView(ApiClient.from_config(cfg), _campground(cfg))

    try:
        view.select_year(args.year or view.current_year)
    except Exception as e:
        print(f"[ERROR] Listing rate cards failed: {e}")
        raise

    if not view.rate_cards:
        print(f"[INFO] No rate cards for {view.selected_year}")
    for card in view.rate_cards:
        print(f"  {card!r}")
        for discount in card.discounts:
            print(f"    discount: {discount!r}")
        for incentive in card.incentives:
            print(f"    incentive: {incentive!r}")


def _cmd_sync_rate_cards(args: argparse.Namespace) -> None:
    cfg = _config(args)
    campground_id = _campground(cfg)
    year = args.year or date.today().year
    session = get_session(cfg.db_url)

    try:
        cards = ApiClient.from_config(cfg).list_rate_cards(campground_id, year)
        count = RateCardRepository.replace_season(session, campground_id, year, cards)
        discounts, incentives = RateCardRepository.count_rules(session)
        session.close()
        print(f"[OK] Stored {count} rate cards for {year} ({discounts} discounts, {incentives} incentives)")

    except Exception as e:
        session.rollback()
        session.close()
        print(f"[ERROR] Rate card sync failed: {e}")
        raise


def _cmd_preview(args: argparse.Namespace) -> None:
    """Print the pricing preview of one rate card."""
    cfg = _config(args)
    ctx = PricingContext(
        is_metered=args.metered,
        pays_in_full=args.pay_in_full,
        payment_method=args.payment_method or cfg.default_payment_method,
    )

    if args.offline:
        session = get_session(cfg.db_url)
        try:
            card = RateCardRepository.get_by_id(session, args.rate_card_id)
            if card is None:
                raise SystemExit(f"Rate card {args.rate_card_id} is not in the snapshot")
            print(summarize_preview(card, preview_pricing(card, ctx)))
        finally:
            session.close()
        return

    view = RateCardsView(ApiClient.from_config(cfg), _campground(cfg))
    try:
        view.select_year(args.year or view.current_year)
        view.set_preview(ctx.is_metered, ctx.pays_in_full, ctx.payment_method)
        result = view.preview(args.rate_card_id)
    except KeyError:
        raise SystemExit(f"Rate card {args.rate_card_id} not found for {view.selected_year}")
    except Exception as e:
        print(f"[ERROR] Preview failed: {e}")
        raise
    print(summarize_preview(view.find_rate_card(args.rate_card_id), result))


def _add_window_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--start", help="First day of the window (YYYY-MM-DD, default today)")
    p.add_argument("--days", type=int, help="Window length in days (default from config)")


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="campdesk",
        description="Campground staff scheduling and seasonal rate cards",
    )

    # Global options
    parser.add_argument("--config", help="Path to config YAML or JSON")
    parser.add_argument("--db", help="Snapshot database URL (default: sqlite:///campdesk.db)")
    parser.add_argument("--base-url", help="Backend origin, overrides config")
    parser.add_argument("--campground", help="Campground id, overrides config")

    sub = parser.add_subparsers(dest="command", required=True)

    init = sub.add_parser("init-db", help="Initialize snapshot database")
    init.set_defaults(func=_cmd_init_db)

    sync = sub.add_parser("sync-shifts", help="Store a window of shifts in the snapshot")
    _add_window_args(sync)
    sync.set_defaults(func=_cmd_sync_shifts)

    ls = sub.add_parser("shifts", help="List shifts with conflicts and a summary")
    _add_window_args(ls)
    ls.add_argument("--status", default="all", choices=status_filter_options())
    ls.add_argument("--offline", action="store_true", help="Read from the snapshot instead of the backend")
    ls.set_defaults(func=_cmd_shifts)

    create = sub.add_parser("create-shift", help="Create a shift")
    create.add_argument("--member", required=True, help="Staff member user id")
    create.add_argument("--date", required=True, help="Shift day (YYYY-MM-DD)")
    create.add_argument("--begin", default="09:00", help="Start time HH:MM")
    create.add_argument("--end", default="17:00", help="End time HH:MM")
    create.add_argument("--role", help="Role name (default: first role of the campground)")
    create.set_defaults(func=_cmd_create_shift)

    for action, help_text in (
        ("submit", "Submit a shift for approval"),
        ("approve", "Approve a submitted shift"),
        ("reject", "Reject a submitted shift"),
    ):
        p = sub.add_parser(action, help=help_text)
        p.add_argument("shift_id")
        p.add_argument("--user", help="Acting user id (required to approve or reject)")
        _add_window_args(p)
        p.set_defaults(func=_cmd_transition, action=action)

    mv = sub.add_parser("move", help="Move a shift by days and/or minutes")
    mv.add_argument("shift_id")
    mv.add_argument("--by-days", type=int, default=0)
    mv.add_argument("--by-minutes", type=int, default=0)
    _add_window_args(mv)
    mv.set_defaults(func=_cmd_move)

    sw = sub.add_parser("swap", help="Request a shift swap")
    sw.add_argument("shift_id")
    sw.add_argument("--user", required=True, help="Requesting user id")
    sw.add_argument("--recipient", required=True, help="User id asked to take the shift")
    sw.add_argument("--note")
    sw.set_defaults(func=_cmd_swap)

    sws = sub.add_parser("swaps", help="List or act on swap requests")
    sws.add_argument("--user", help="Current user id")
    sws.add_argument("--tab", default=SwapTab.ALL.value, choices=[t.value for t in SwapTab])
    acts = sws.add_mutually_exclusive_group()
    acts.add_argument("--accept", metavar="SWAP_ID")
    acts.add_argument("--decline", metavar="SWAP_ID")
    acts.add_argument("--approve", metavar="SWAP_ID")
    acts.add_argument("--reject", metavar="SWAP_ID")
    acts.add_argument("--cancel", metavar="SWAP_ID")
    sws.set_defaults(func=_cmd_swaps)

    sm = sub.add_parser("site-map", help="Show the campground map image and site counters")
    sm.add_argument("--start", help="Booking window start (YYYY-MM-DD)")
    sm.add_argument("--end", help="Booking window end (YYYY-MM-DD)")
    sm.set_defaults(func=_cmd_site_map)

    rc = sub.add_parser("rate-cards", help="List seasonal rate cards")
    rc.add_argument("--year", type=int, help="Season year (default current year)")
    rc.set_defaults(func=_cmd_rate_cards)

    src = sub.add_parser("sync-rate-cards", help="Store a season's rate cards in the snapshot")
    src.add_argument("--year", type=int, help="Season year (default current year)")
    src.set_defaults(func=_cmd_sync_rate_cards)

    pv = sub.add_parser("preview", help="Preview pricing of a rate card")
    pv.add_argument("rate_card_id")
    pv.add_argument("--year", type=int, help="Season year (default current year)")
    pv.add_argument("--metered", action="store_true", help="Site has metered utilities")
    pv.add_argument("--pay-in-full", action="store_true", help="Guest pays the season in full")
    pv.add_argument("--payment-method", help="Payment method (default from config)")
    pv.add_argument("--offline", action="store_true", help="Read the rate card from the snapshot")
    pv.set_defaults(func=_cmd_preview)

    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
