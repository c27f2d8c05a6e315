import math
from abc import ABC, abstractmethod
from typing import Callable, Generic, Iterable, List, Optional, Tuple, TypeVar

from ledger.domain import (
    FREQUENCIES,
    TRANSACTION_TYPES,
    TRANSFER,
    Account,
    RecurringTransaction,
    Transaction,
)

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')


class Maybe(Generic[T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        pass

    @abstractmethod
    def bind(self, f: Callable[[T], 'Maybe[U]']) -> 'Maybe[U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    def is_some(self) -> bool:
        return not self.is_none()

    @abstractmethod
    def is_none(self) -> bool:
        pass


class Some(Maybe[T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Some(f(self._value))

    def bind(self, f: Callable[[T], 'Maybe[U]']) -> 'Maybe[U]':
        return f(self._value)

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_none(self) -> bool:
        return False

    def __repr__(self) -> str:
        return f"Some({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Some) and self._value == other._value


class Nothing(Maybe[T]):

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Nothing()

    def bind(self, f: Callable[[T], 'Maybe[U]']) -> 'Maybe[U]':
        return Nothing()

    def get_or_else(self, default: T) -> T:
        return default

    def is_none(self) -> bool:
        return True

    def __repr__(self) -> str:
        return "Nothing()"

    def __eq__(self, other) -> bool:
        return isinstance(other, Nothing)


class Either(Generic[E, T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        pass

    @abstractmethod
    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_right(self) -> bool:
        pass

    def is_left(self) -> bool:
        return not self.is_right()

    @abstractmethod
    def get_error(self) -> E:
        pass


class Right(Either[E, T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return Right(f(self._value))

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return f(self._value)

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_right(self) -> bool:
        return True

    def get_error(self) -> E:
        raise ValueError("Cannot get error from Right")

    def __repr__(self) -> str:
        return f"Right({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Right) and self._value == other._value


class Left(Either[E, T]):

    def __init__(self, error: E):
        self._error = error

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return Left(self._error)

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return Left(self._error)

    def get_or_else(self, default: T) -> T:
        return default

    def is_right(self) -> bool:
        return False

    def get_error(self) -> E:
        return self._error

    def __repr__(self) -> str:
        return f"Left({self._error!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Left) and self._error == other._error


def safe_account(accs: Iterable[Account], acc_id: Optional[str]) -> Maybe[Account]:
    if not acc_id:
        return Nothing()
    for acc in accs:
        if acc.id == acc_id:
            return Some(acc)
    return Nothing()


def _bad_amount(amount) -> bool:
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        return True
    return not math.isfinite(amount) or amount < 0


def validate_transaction(t: Transaction) -> Either[dict, Transaction]:
    """Check the record invariants the aggregations rely on."""
    if t.type not in TRANSACTION_TYPES:
        return Left({
            "error": "unknown_type",
            "message": f"Transaction {t.id} has unknown type {t.type!r}",
            "transaction_id": t.id,
        })

    if _bad_amount(t.amount):
        return Left({
            "error": "invalid_amount",
            "message": f"Transaction {t.id} has invalid amount {t.amount!r}",
            "transaction_id": t.id,
        })

    if t.type == TRANSFER:
        if not t.to_account_id or t.to_account_id == t.account_id:
            return Left({
                "error": "invalid_transfer",
                "message": f"Transfer {t.id} needs a destination distinct from its source",
                "transaction_id": t.id,
            })
    elif t.to_account_id:
        return Left({
            "error": "unexpected_destination",
            "message": f"Only transfers have a destination account, {t.id} is {t.type}",
            "transaction_id": t.id,
        })

    return Right(t)


def validate_recurring(r: RecurringTransaction) -> Either[dict, RecurringTransaction]:
    if r.frequency not in FREQUENCIES:
        return Left({
            "error": "unknown_frequency",
            "message": f"Recurring {r.id} has unknown frequency {r.frequency!r}",
            "recurring_id": r.id,
        })
    if r.type not in TRANSACTION_TYPES or _bad_amount(r.amount):
        return Left({
            "error": "invalid_recurring",
            "message": f"Recurring {r.id} has invalid type or amount",
            "recurring_id": r.id,
        })
    return Right(r)


def partition_valid(
    items: Iterable[T], validate: Callable[[T], Either]
) -> Tuple[Tuple[T, ...], List[dict]]:
    valid, errors = [], []
    for item in items:
        try:
            result = validate(item)
        except (AttributeError, TypeError) as e:
            result = Left({"error": "malformed_record", "message": f"Malformed record {item!r}: {e}"})
        if result.is_right():
            valid.append(result.get_or_else(item))
        else:
            errors.append(result.get_error())
    return tuple(valid), errors


def pipe(x, *funcs):
    """Pipe a value through a series of functions.

    pipe(x, f, g, h) == h(g(f(x)))
    """
    res = x
    for f in funcs:
        res = f(res)
    return res
