from hypothesis import settings

# Engine calls build a pydantic event per step; first examples can be slow.
settings.register_profile("dnc", deadline=None)
settings.load_profile("dnc")
