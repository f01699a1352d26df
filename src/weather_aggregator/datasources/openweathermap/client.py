"""OpenWeatherMap API constants.

API docs: https://openweathermap.org/current
"""

OPENWEATHERMAP_API = "https://api.openweathermap.org/data/2.5/weather"

SOURCE_NAME = "openweathermap"

#: Celsius / hPa / percent.
UNITS = "metric"
