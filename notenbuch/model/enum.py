import enum


class DeploymentEnvironment(enum.Enum):
    Production = "production"
    Development = "development"
    Test = "test"
    Local = "local"


class GradeLabel(enum.Enum):
    SehrGut = "sehr gut"
    Gut = "gut"
    Genuegend = "genügend"
    Ungenuegend = "ungenügend"

    @property
    def rank(self) -> int:
        """Position in the scale, 0 being the best grade."""
        return _ranks[self]


_ranks = {label: i for i, label in enumerate(GradeLabel)}
