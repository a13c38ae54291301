from django.urls import path
from . import views

urlpatterns = [
    path('dashboard/summary/', views.dashboard_summary, name='dashboard-summary'),
    path('dashboard/low-stock-alerts/', views.low_stock_alerts, name='dashboard-low-stock-alerts'),
    path('dashboard/top-selling-products/', views.top_selling_products, name='dashboard-top-selling-products'),
    path('dashboard/stock-distribution/', views.stock_distribution, name='dashboard-stock-distribution'),
    path('dashboard/supply-risk-report/', views.supply_risk_report, name='dashboard-supply-risk-report'),
    path('dashboard/purchase-forecast/', views.purchase_forecast, name='dashboard-purchase-forecast'),
    path('customers/trends/product-analysis/', views.customer_product_trends, name='customer-product-trends'),
]
