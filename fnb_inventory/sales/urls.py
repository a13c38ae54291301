from django.urls import path
from .views import order_list_create, order_detail, order_items, order_item_detail

urlpatterns = [
    path('customer-orders/', order_list_create, name='order-list-create'),
    path('customer-orders/<int:pk>/', order_detail, name='order-detail'),
    path('customer-orders/<int:pk>/items/', order_items, name='order-items'),
    path('customer-orders/<int:pk>/items/<int:item_id>/', order_item_detail, name='order-item-detail'),
]
