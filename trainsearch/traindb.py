"""Train database interfaces and a stand-alone train entry."""

from __future__ import annotations

import abc
from dataclasses import dataclass

from trainsearch.traindb_defs import DccMode, Symbol


class TrainDbEntry(abc.ABC):
    """One train known to the database."""

    @property
    @abc.abstractmethod
    def identifier(self) -> str:
        """Internal identifier telling where this entry was allocated from."""

    @property
    @abc.abstractmethod
    def traction_node(self) -> int:
        """Node ID of the virtual node representing this train."""

    @property
    @abc.abstractmethod
    def train_name(self) -> str:
        """Name of the train."""

    @property
    @abc.abstractmethod
    def train_description(self) -> str:
        """Description of the train."""

    @property
    @abc.abstractmethod
    def legacy_address(self) -> int:
        """Legacy (track protocol) address of the train."""

    @property
    @abc.abstractmethod
    def legacy_drive_mode(self) -> DccMode:
        """Traction drive mode of the train."""

    @abc.abstractmethod
    def function_label(self, fn_id: int) -> int:
        """Label of function ``fn_id``, or ``Symbol.FN_NONEXISTANT``."""

    @property
    @abc.abstractmethod
    def max_fn(self) -> int:
        """Largest valid function number, or -1 when the train has none."""

    @property
    def file_offset(self) -> int:
        """Offset of this train's data in the config file, or -1 if not stored."""
        return -1

    @abc.abstractmethod
    def start_read_functions(self) -> None:
        """Prepare for reading all function labels."""


class TrainDb(abc.ABC):
    """A collection of train entries indexed by train id."""

    @abc.abstractmethod
    def __len__(self) -> int:
        """Number of entries; valid train ids are ``0 <= id < len(db)``."""

    @abc.abstractmethod
    def is_train_id_known(self, train_id: int) -> bool:
        """Whether a train id or traction node id is known to the database."""

    @abc.abstractmethod
    def get_entry(self, train_id: int) -> TrainDbEntry | None:
        """The entry for ``train_id``, or ``None`` when it is not known."""

    @abc.abstractmethod
    def find_entry(self, traction_node_id: int, hint: int = 0) -> TrainDbEntry | None:
        """Search by traction node id; ``hint`` is a train id that may match."""

    @abc.abstractmethod
    def add_dynamic_entry(self, address: int, mode: DccMode) -> int:
        """Insert an entry for a locomotive and return its new train id."""


@dataclass
class ExternalTrainDbEntry(TrainDbEntry):
    """A train described only by name, address and mode, outside any database."""

    name: str
    address: int
    mode: DccMode = DccMode.DCC_28
    description: str = ""

    @property
    def identifier(self) -> str:
        return ""

    @property
    def traction_node(self) -> int:
        return 0

    @property
    def train_name(self) -> str:
        return self.name

    @property
    def train_description(self) -> str:
        return self.description

    @property
    def legacy_address(self) -> int:
        return self.address & 0xFFFF

    @property
    def legacy_drive_mode(self) -> DccMode:
        return DccMode(self.mode)

    def function_label(self, fn_id: int) -> int:
        return Symbol.FN_NONEXISTANT

    @property
    def max_fn(self) -> int:
        return 0

    def start_read_functions(self) -> None:
        pass