class BenchLabError(Exception):
    pass


class ConfigurationError(BenchLabError):
    pass


class SelectionError(BenchLabError):
    pass


class EmptyBatchError(SelectionError):
    pass


class ScoreFieldError(SelectionError):
    pass
