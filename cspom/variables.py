from itertools import count

_ids = count()


class Variable:
    """A vertex of the constraint hypergraph.

    Named variables are the user's decision variables. Auxiliary variables are
    synthesized while compiling expressions, either to hold the result of a
    nested call (unnamed) or to hold an integer constant (``value`` set).
    """

    def __init__(
        self,
        name: str | None = None,
        value: int | None = None,
        *,
        auxiliary: bool = False,
    ) -> None:
        if name is not None and not name:
            raise ValueError("Variable name can not be empty")
        self.id = next(_ids)
        self.name = name
        self.value = value
        self._auxiliary = auxiliary

    @classmethod
    def constant(cls, value: int) -> "Variable":
        return cls(value=value, auxiliary=True)

    @property
    def auxiliary(self) -> bool:
        return self._auxiliary

    @property
    def is_constant(self) -> bool:
        return self.value is not None

    @property
    def label(self) -> str:
        if self.name is not None:
            return self.name
        if self.is_constant:
            return str(self.value)
        return f"_{self.id}"

    def node_label(self) -> str:
        if self.is_constant:
            return "Constant"
        return "Auxiliary" if self.auxiliary else "Variable"

    def node_symbol(self) -> str | None:
        return self.label

    def __repr__(self):
        return self.label

    def __str__(self) -> str:
        return self.__repr__()
