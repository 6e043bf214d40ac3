class HabitLedgerError(Exception):
    """Base class for errors raised by habit-ledger."""


class PersistenceError(HabitLedgerError):
    """The habit collection could not be written to its store."""


class ConfigError(HabitLedgerError):
    """A setting read from the environment is missing or invalid."""
