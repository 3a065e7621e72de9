from .dns_checker import DNSChecker
from .whois_checker import WhoisChecker
from .availability_service import AvailabilityResult, AvailabilityService, annotate_availability

__all__ = ['DNSChecker', 'WhoisChecker', 'AvailabilityResult', 'AvailabilityService', 'annotate_availability']
