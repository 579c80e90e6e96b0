from .registration import RegistrationRequest, OtpVerifyRequest, OtpResendRequest, CandidateResponse, ApproveRequest, MessageResponse
from .auth import Token, LoginRequest, AccountProfile
from .donation import DonationCreate, DonationCreated, PendingDonation, DonationHistoryItem
from .rating import RatingCreate, RatingEntry, DonorProfile
from .analytics import CategoryCount, QuantityPoint, StatusPoint, TopDonor, StatisticsSummary, RecentDonation, ReportRow
from .contact import ContactRequest, FeedbackRequest, FeedbackResponse
from .like import LikeRequest, LikeStatus, LikeResult
