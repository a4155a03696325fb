from django.urls import path
from transactions import views

urlpatterns = [
    path('transactions/<str:status>/', views.my_transactions, name='my_transactions'),

    # Single transaction
    path('transaction/<uuid:item_id>/', views.get_transaction, name='get_transaction'),
    path('transaction/<uuid:item_id>/deliverydetails/', views.delivery_details, name='delivery_details'),
]
