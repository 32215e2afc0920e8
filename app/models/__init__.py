from app.models.profile import Profile
from app.models.book import Book, BookCondition
from app.models.listing import Listing, ListingStatus
from app.models.cart import CartItem
from app.models.order import Order, OrderStatus
from app.models.message import Message

# add ALL models here
