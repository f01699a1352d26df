"""External data source integrations.

Each subdirectory is one data source with a consistent structure:

    datasources/{name}/
    ├── __init__.py       # Public API re-exports
    ├── client.py         # API URLs, constants, shared parsing helpers
    └── {feature}.py      # Fetch functions / provider classes

``base.py`` holds the ``Provider`` protocol every live source implements and
the ``get_json`` helper that turns transport and decode problems into
``ProviderUnavailable`` / ``MalformedResponse``.

Adding a new live provider
--------------------------
1. Create ``datasources/{name}/`` with the files above.
   See ``openweathermap/`` for a keyed API, ``openmeteo/`` for a keyless one.

2. Write a class with a ``name`` and a ``fetch`` method::

       from weather_aggregator.datasources.base import get_json

       class MyProvider:
           name = "myprovider"

           def fetch(self, location: Location) -> Observation:
               data = get_json(API_URL, params={...}, source=self.name)
               return Observation(temp=..., source=self.name, source_response=data)

3. Re-export it in ``__init__.py`` with ``__all__``.

4. Add it to ``default_providers()`` in ``datasources/providers.py``.

5. Add tests in ``tests/test_providers.py``.
"""
