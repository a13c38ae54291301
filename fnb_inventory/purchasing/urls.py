from django.urls import path
from .views import purchase_list_create, purchase_detail, purchase_items, purchase_item_detail

urlpatterns = [
    path('supplier-purchases/', purchase_list_create, name='purchase-list-create'),
    path('supplier-purchases/<int:pk>/', purchase_detail, name='purchase-detail'),
    path('supplier-purchases/<int:pk>/items/', purchase_items, name='purchase-items'),
    path('supplier-purchases/<int:pk>/items/<int:item_id>/', purchase_item_detail, name='purchase-item-detail'),
]
