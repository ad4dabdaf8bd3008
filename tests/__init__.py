import os

# Enable runtime type checking if requested via environment variable
if os.getenv("TORUSGRID_RUNTIME_TYPECHECKING", "").lower() in ("1", "true", "yes"):
    from beartype import BeartypeConf
    from beartype.claw import beartype_this_package

    beartype_this_package(conf=BeartypeConf(is_pep484_tower=True))
