import json, csv
from pathlib import Path
from dataclasses import dataclass
from typing import Any


def stringify_ints(data: Any) -> Any:
    """
    Reward amounts overflow javascript numbers, so integers are written as decimal strings.
    Booleans are left alone.
    """
    if isinstance(data, bool):
        return data
    if isinstance(data, int):
        return str(data)
    if isinstance(data, dict):
        return {k: stringify_ints(v) for k, v in data.items()}
    if isinstance(data, list):
        return [stringify_ints(v) for v in data]
    return data


@dataclass
class Writer:
    run_id: str
    root: str = "reports"

    @property
    def path(self) -> str:
        return f"{self.root}/{self.run_id}"

    @property
    def csv_path(self) -> str:
        return f"{self.path}/csv"

    @property
    def json_path(self) -> str:
        return f"{self.path}/json"

    @staticmethod
    def flatten_json(y):
        out = {}

        def flatten(x, name=""):
            # If the Nested key-value
            # pair is of dict type
            if type(x) is dict:
                for a in x:
                    flatten(x[a], name + a + "_")

            # If the Nested key-value
            # pair is of list type
            elif type(x) is list:
                i = 0
                for a in x:
                    flatten(a, name + str(i) + "_")
                    i += 1
            else:
                out[name[:-1]] = x

        flatten(y)
        return out

    def flatten_json_array(self, data):
        return [self.flatten_json(item) for item in data]

    @staticmethod
    def write_csv(data, path: str, fieldnames) -> None:
        with open(path, "w+", newline="") as f:
            writer = csv.DictWriter(
                f, delimiter=",", fieldnames=list(fieldnames), extrasaction="ignore"
            )
            writer.writeheader()
            writer.writerows(data)

    # create the directory in the reports folder for csv and json if it doesn't exist
    def _create_dir(self) -> None:
        Path(self.path).mkdir(parents=True, exist_ok=True)
        Path(self.csv_path).mkdir(parents=True, exist_ok=True)
        Path(self.json_path).mkdir(parents=True, exist_ok=True)

    def to_csv(self, data, name: str, fieldnames) -> None:
        self._create_dir()
        self.write_csv(data, f"{self.csv_path}/{name}.csv", fieldnames)

    def to_json(self, data, name: str) -> None:
        self._create_dir()
        with open(f"{self.json_path}/{name}.json", "w") as f:
            json.dump(stringify_ints(data), f, indent=4)

    def to_csv_and_json(self, data, name: str) -> None:
        if isinstance(data, list):
            csv_data = self.flatten_json_array(data)
            keys = csv_data[0].keys() if len(csv_data) > 0 else []
        else:
            csv_data = [self.flatten_json(data)]
            keys = csv_data[0].keys()
        self.to_json(data, name)
        self.to_csv(csv_data, name, keys)
