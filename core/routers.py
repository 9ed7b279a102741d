"""
URL mappings for the clinic API.

Trailing slashes are deliberately omitted (``APPEND_SLASH`` is off), so
``/patients`` and ``/patients/`` are not the same route.
"""
from django.urls import include, path

from .auth_views import jwt_logout_view, jwt_refresh_view, login_view
from .views import health
from .views.patients import patient_detail, patients_list
from .views.prescriptions import prescription_detail, prescriptions_list
from .views.queues import queue_complete, queue_remove, queue_start, queues_list
from .views.visits import visit_detail, visits_list


urlpatterns = [
    # django_prometheus registers /metrics itself
    path('', include('django_prometheus.urls')),
    path('healthz', health.healthz),
    # Authentication
    path('auth/login', login_view),
    path('auth/refresh', jwt_refresh_view),
    path('auth/logout', jwt_logout_view),
    # Patients
    path('patients', patients_list),
    path('patients/<int:pk>', patient_detail),
    # Queue
    path('queues', queues_list),
    path('queues/<int:pk>/start', queue_start),
    path('queues/<int:pk>/complete', queue_complete),
    path('queues/<int:pk>', queue_remove),
    # Visits
    path('visits', visits_list),
    path('visits/<int:pk>', visit_detail),
    # Prescriptions
    path('prescriptions', prescriptions_list),
    path('prescriptions/<int:pk>', prescription_detail),
]
