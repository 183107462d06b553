import os
from tinydb import TinyDB, where

from aero_rewards.models.Distribution import (
    DistributionReport,
    GaugeDistributionResult,
    GaugeStatus,
)
from aero_rewards.models.Writer import stringify_ints


class DB(TinyDB):
    """
    Run database, one table per gauge distribution plus a `gauges` table
    with the per gauge outcome and a `summary` table for the whole run.
    """

    run_id: str

    def __init__(self, run_id: str, root: str = "reports", drop=False, **kwargs):
        self.run_id = run_id
        path = f"{root}/{run_id}/reporter-db.json"

        # check if the directory exists
        create_dirs = self.exists(path) == False
        super().__init__(
            path,
            indent=4,
            create_dirs=create_dirs,
            **kwargs,
        )

        if drop:
            self.drop_tables()

    @staticmethod
    def exists(path: str):
        return os.path.exists(path)

    def write_gauge_result(self, result: GaugeDistributionResult) -> None:
        gauge_row = result.dict(exclude={"distributions"})
        self.table("gauges").insert(stringify_ints(gauge_row))

        if result.status == GaugeStatus.DISTRIBUTED:
            self.table(f"{result.gauge}_distribution").insert_multiple(
                [stringify_ints(d.dict()) for d in result.distributions]
            )

    def write_report(self, report: DistributionReport) -> None:
        for result in report.results:
            self.write_gauge_result(result)
        self.table("summary").insert(stringify_ints(report.summary()))

    def gauges_with_status(self, status: GaugeStatus) -> list[dict]:
        return self.table("gauges").search(where("status") == status.value)
