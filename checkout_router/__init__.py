"""
Pronto checkout router: transforme une soumission de formulaire (services choisis)
en session Stripe Checkout puis redirige le navigateur vers le paiement.
"""

__version__ = "1.2.0"
