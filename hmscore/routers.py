"""
URL mappings for the HMS Core API.

Trailing slashes are omitted to match the paths the web client calls.
Fixed sub-paths of ``nurse-department-preferences`` are registered before
the ``<nurse_id>`` route so they are never read as a nurse id.
"""
from django.urls import include, path

from .auth_views import jwt_logout_view, jwt_refresh_view, login_view
from .views import health
from .views.department_assignments import department_assignments, initialize_departments
from .views.navigation import access, menu
from .views.permissions import current_permissions, role_permissions
from .views.preferences import (
    all_nurses,
    department_choices,
    preference_assignment,
    preference_availability,
    preference_detail,
    preferences,
    seed_preferences,
)
from .views.staffing import staffing_stats


urlpatterns = [
    path('metrics', include('django_prometheus.urls')),
    path('healthz', health.healthz, name='healthz'),
    # Authentication
    path('api/auth/login', login_view, name='login_view'),
    path('api/auth/refresh', jwt_refresh_view, name='jwt_refresh'),
    path('api/auth/logout', jwt_logout_view, name='jwt_logout'),
    # Nurse department preferences
    path('api/nurse-department-preferences', preferences, name='preferences'),
    path('api/nurse-department-preferences/departments', department_choices, name='preference_departments'),
    path('api/nurse-department-preferences/all-nurses', all_nurses, name='preference_all_nurses'),
    path('api/nurse-department-preferences/seed', seed_preferences, name='preference_seed'),
    path('api/nurse-department-preferences/<str:nurse_id>', preference_detail, name='preference_detail'),
    path('api/nurse-department-preferences/<str:nurse_id>/availability', preference_availability,
         name='preference_availability'),
    path('api/nurse-department-preferences/<str:nurse_id>/assignment', preference_assignment,
         name='preference_assignment'),
    # Department nurse assignments
    path('api/department-nurse-assignments', department_assignments, name='department_assignments'),
    path('api/department-nurse-assignments/initialize', initialize_departments, name='department_initialize'),
    # Staffing overview
    path('api/staffing/stats', staffing_stats, name='staffing_stats'),
    # Navigation and permissions
    path('api/navigation/menu', menu, name='navigation_menu'),
    path('api/navigation/access', access, name='navigation_access'),
    path('api/permissions/current', current_permissions, name='permissions_current'),
    path('api/permissions/roles/<str:role>', role_permissions, name='permissions_role'),
]
