"""External data source integrations.

Each subdirectory is one data source with a consistent structure:

    datasources/{name}/
    ├── __init__.py       # Public API re-exports
    ├── client.py         # API URLs, constants
    ├── errors.py         # Exceptions for server-reported failures
    └── {feature}.py      # Fetch functions (one per endpoint/concept)

Adding a new datasource
-----------------------
1. Create ``datasources/{name}/`` with files above.
   See ``wunderground/`` for the station document source.

2. Write fetch functions on the shared session::

       from wuweather.services.http import session

       def fetch_something(station) -> Element:
           resp = session.get(url)
           ...

3. Re-export public API in ``__init__.py`` with ``__all__``.

4. Pass the fetch function to ``FetchAndApplyCycle(fetch=...)`` or
   ``WeatherPlugin(fetch=...)`` and describe its fields in a definition tree.

5. Add tests in ``tests/test_{name}.py``.
"""
