"""
URL configuration for the F&B inventory management API.

Every app contributes its own urlpatterns under the shared ``api/`` prefix.
"""
from django.contrib import admin
from django.urls import path, include

admin.site.site_header = "F&B Inventory Admin Panel"
admin.site.site_title = "F&B Inventory Admin Portal"
admin.site.index_title = "Inventory, purchasing and sales"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include('fnb_inventory.core.urls')),
    path('api/', include('fnb_inventory.catalog.urls')),
    path('api/', include('fnb_inventory.parties.urls')),
    path('api/', include('fnb_inventory.purchasing.urls')),
    path('api/', include('fnb_inventory.sales.urls')),
    path('api/', include('fnb_inventory.reports.urls')),
]
