"""Core application for the clinic backend.

This package contains the models, services, serializers, views and
route registrations for patients, the visit queue, visits and
prescriptions.
"""
