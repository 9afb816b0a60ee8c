from importlib.metadata import version, PackageNotFoundError


try:
    __version__ = version('melon-bdd')
except PackageNotFoundError:
    __version__ = 'unknown'
