from django.urls import path
from .views import product_list_create, product_detail, category_list_create, product_low_stock

urlpatterns = [
    path('products/', product_list_create, name='product-list-create'),
    path('products/meta/categories/', category_list_create, name='product-categories'),
    path('products/alerts/low-stock/', product_low_stock, name='product-low-stock'),
    path('products/<int:pk>/', product_detail, name='product-detail'),
]
