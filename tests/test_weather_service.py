"""Tests for weather_service.py — reading normalization and the OpenWeatherMap fetch."""

from unittest.mock import patch, MagicMock

import pytest
import requests

from weather_service import WeatherReading, get_current_reading


class TestFromCurrentConditions:
    def test_full_payload(self):
        payload = {
            'Temperature': {'Imperial': {'Value': 96.4}},
            'Wind': {'Speed': {'Imperial': {'Value': 12.0}}},
            'WindGust': {'Speed': {'Imperial': {'Value': 20.0}}},
            'RelativeHumidity': 40,
            'PrecipitationProbability': 10,
            'WeatherText': 'Sunny',
        }
        reading = WeatherReading.from_current_conditions(payload, city='Fresno')
        assert reading.temperature_f == 96.4
        assert reading.wind_speed_mph == 12.0
        assert reading.wind_gust_mph == 20.0
        assert reading.humidity == 40
        assert reading.precipitation_probability == 10
        assert reading.condition == 'Sunny'
        assert reading.city == 'Fresno'

    def test_missing_gust_is_zero(self):
        payload = {
            'Temperature': {'Imperial': {'Value': 70}},
            'Wind': {'Speed': {'Imperial': {'Value': 5}}},
            'RelativeHumidity': 55,
        }
        reading = WeatherReading.from_current_conditions(payload)
        assert reading.wind_gust_mph == 0.0
        assert reading.condition == ''
        assert reading.precipitation_probability == 0.0

    def test_empty_payload(self):
        reading = WeatherReading.from_current_conditions({})
        assert (reading.temperature_f, reading.wind_speed_mph, reading.humidity) == (0.0, 0.0, 0.0)


class TestFromOpenWeather:
    def test_payload(self):
        payload = {
            'main': {'temp': 38.2, 'humidity': 91},
            'wind': {'speed': 33.1},
            'weather': [{'description': 'light rain'}],
            'name': 'Denver',
        }
        reading = WeatherReading.from_openweather(payload)
        assert reading.temperature_f == 38.2
        assert reading.humidity == 91
        assert reading.wind_speed_mph == 33.1
        assert reading.wind_gust_mph == 0.0
        assert reading.condition == 'light rain'
        assert reading.city == 'Denver'
        assert reading.precipitation_probability == 0.0

    def test_pop_fraction_to_percent(self):
        reading = WeatherReading.from_openweather({'main': {'temp': 60}, 'pop': 0.85})
        assert reading.precipitation_probability == pytest.approx(85.0)

    def test_from_dict_precipitation(self):
        reading = WeatherReading.from_dict({'precipitation_probability': 90, 'condition': 'Rain'})
        assert reading.precipitation_probability == 90.0
        assert reading.condition == 'Rain'

    def test_from_dict_ignores_bad_numbers(self):
        reading = WeatherReading.from_dict({'temperature_f': 'hot', 'humidity': 50})
        assert reading.temperature_f == 0.0
        assert reading.humidity == 50.0


class TestGetCurrentReading:
    def test_no_api_key(self, monkeypatch):
        monkeypatch.delenv("OPENWEATHER_API_KEY", raising=False)
        assert get_current_reading(city='Denver') is None

    def test_no_location(self, monkeypatch):
        monkeypatch.setenv("OPENWEATHER_API_KEY", "test-key")
        assert get_current_reading() is None

    @patch('weather_service.requests.get')
    def test_fetch(self, mock_get, monkeypatch):
        monkeypatch.setenv("OPENWEATHER_API_KEY", "test-key")
        response = MagicMock()
        response.json.return_value = {
            'main': {'temp': 72, 'humidity': 60},
            'wind': {'speed': 8},
            'weather': [{'description': 'clear sky'}],
            'name': 'Boulder',
        }
        mock_get.return_value = response
        reading = get_current_reading(lat=40.0, lon=-105.3)
        assert reading.city == 'Boulder'
        _, kwargs = mock_get.call_args
        assert kwargs['params']['units'] == 'imperial'
        assert kwargs['params']['lat'] == 40.0

    @patch('weather_service.requests.get')
    def test_request_failure(self, mock_get, monkeypatch):
        monkeypatch.setenv("OPENWEATHER_API_KEY", "test-key")
        mock_get.side_effect = requests.Timeout("slow")
        assert get_current_reading(city='Denver', state='CO') is None
