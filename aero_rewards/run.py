from typing import Optional

import fire

from aero_rewards import utils
from aero_rewards.config import load_conf
from aero_rewards.epochs import get_current_timestamp
from aero_rewards.errors import BadConfigException
from aero_rewards.models import (
    Config,
    DB,
    DistributionPeriod,
    DistributionReport,
    GaugeStatus,
    Writer,
)
from aero_rewards.distribute import run_distribution
from aero_rewards.rewards import group_by_borrower


def resolve_period(
    conf: Config,
    start: Optional[int],
    end: Optional[int],
    rolling: bool,
    now: Optional[int] = None,
) -> Optional[DistributionPeriod]:
    """
    An explicit [start, end) wins, `rolling` gives the configured period length ending now.
    None means every gauge uses its own epoch derived period.
    """
    if (start is None) != (end is None):
        raise BadConfigException("Pass both --start and --end, or neither")
    if start is not None and end is not None:
        return DistributionPeriod(startTimestamp=start, endTimestamp=end)
    if rolling:
        current = now if now is not None else get_current_timestamp(conf)
        return DistributionPeriod.rolling(current, conf.distribution_period_seconds)
    return None


def write_report(report: DistributionReport, writer: Writer, db: DB) -> None:
    """Full report as json, per gauge trove & borrower breakdowns as csv + json, and the run db"""
    writer.to_json(report.dict(), "distribution")
    writer.to_json(report.summary(), "summary")

    for result in report.results:
        if result.status != GaugeStatus.DISTRIBUTED:
            continue
        writer.to_csv_and_json(
            [d.dict() for d in result.distributions], f"{result.gauge}-troves"
        )
        writer.to_csv_and_json(
            [
                b.dict(exclude={"troves"}) | {"troves": len(b.troves)}
                for b in group_by_borrower(result.distributions)
            ],
            f"{result.gauge}-borrowers",
        )

    db.write_report(report)


def main(
    start: Optional[int] = None,
    end: Optional[int] = None,
    rolling: bool = False,
    fail_fast: bool = False,
    quiet: bool = False,
    out: str = "reports",
) -> str:
    """
    Calculate the AERO distribution for every gauge and write it to `out/<timestamp>`.

    :param `start`, `end`: optional period override, unix seconds
    :param `rolling`: use the last DISTRIBUTION_PERIOD_SECONDS as the period for every gauge
    :param `fail_fast`: stop at the first gauge that fails
    """
    conf = load_conf(fail_fast=fail_fast, verbose=not quiet)

    now = get_current_timestamp(conf)
    period = resolve_period(conf, start, end, rolling, now)
    report = run_distribution(conf, period_override=period, current_timestamp=now)

    run_id = str(report.generatedAt)
    write_report(report, Writer(run_id, root=out), DB(run_id, root=out, drop=True))

    for failed in report.failed:
        utils.log(conf, f"❌ Gauge {failed.gauge} failed: {failed.reason}")
    utils.log(conf, f"😃 Wrote distribution to {out}/{run_id}")

    return f"{out}/{run_id}"


if __name__ == "__main__":
    fire.Fire(main)
