__all__ = ["FieldCache", "Generated", "NotGenerated", "normalize", "sample_sphere"]

from .fields import FieldCache, Generated, NotGenerated, normalize, sample_sphere
