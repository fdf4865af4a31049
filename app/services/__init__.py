"""
Service Organization
====================
Services are organized by their lifecycle and instantiation pattern:

**application/**
  Singleton services managed by ServiceContainer. One instance per application.
  Examples: ReminderService, PlantService, CareLogService, NotificationsService

**utilities/**
  Clients for external systems that can be instantiated multiple times.
  Examples: WeatherService
"""
